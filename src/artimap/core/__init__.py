"""Core library for artimap (mapping engine, staging model, resolver)."""
