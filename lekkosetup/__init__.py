"""setup-lekko: install the Lekko CLI from GitHub releases."""
