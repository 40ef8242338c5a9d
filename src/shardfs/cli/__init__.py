"""shardfs command line interface."""
