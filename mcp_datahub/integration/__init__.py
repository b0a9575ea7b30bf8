"""Protocols and records for extending DataHub access with query engines and policies."""