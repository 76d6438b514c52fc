"""Framework integrations for encodable."""
