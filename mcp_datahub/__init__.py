"""DataHub metadata catalog client, multi-server connections and extension points."""

__version__ = "0.1.0"