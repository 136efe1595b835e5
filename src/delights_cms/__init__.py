"""Persistence layer and admin API for the Delights content backend."""
