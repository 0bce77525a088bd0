"""otherside/api — JSON boundary models for the surrounding service."""
