"""GraphQL client for DataHub: configuration, errors, models, URNs and queries."""