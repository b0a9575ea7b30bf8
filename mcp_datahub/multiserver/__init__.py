"""Configuration and management of connections to several DataHub servers."""