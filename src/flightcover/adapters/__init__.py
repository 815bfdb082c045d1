"""Adapters binding the domain ports to Sui, AviationStack and SQLAlchemy."""
