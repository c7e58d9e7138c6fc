"""activerow command line interface."""
