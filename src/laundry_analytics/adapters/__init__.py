"""Adapters – SQLAlchemy warehouse writer and Kafka event transport."""
