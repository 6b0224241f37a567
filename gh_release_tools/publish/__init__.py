"""Publish a code directory as a versioned GitHub release."""
