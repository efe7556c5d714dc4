"""Persistence layer: settings, engine and sessions, entities, DAOs and the query functions built on them."""
