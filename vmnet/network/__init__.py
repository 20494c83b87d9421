"""Network interface provisioning against the configured backend."""
