"""Search algorithms used for corridor carving."""
