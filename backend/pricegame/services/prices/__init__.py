"""Price series: upstream feed client, periodic ingestion and trend derivation."""
