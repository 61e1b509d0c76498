"""Collaborators around the resolver: install root, pins, releases, installer, doctor."""
