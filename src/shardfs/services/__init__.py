"""Storage services: backends and the sharded filesystem facade."""
