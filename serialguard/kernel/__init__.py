"""serialguard kernel: scanning, middleware, configuration and ports."""
