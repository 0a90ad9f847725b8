"""test fixtures for pyselect."""
