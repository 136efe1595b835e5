"""Domain records of the content backend."""
