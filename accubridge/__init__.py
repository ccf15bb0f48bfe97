"""accubridge command-line front end."""
