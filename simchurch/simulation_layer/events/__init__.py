"""Random events: catalog, effect operations and the event engine."""
