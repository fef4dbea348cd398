"""Framework integrations for cert-installer."""
