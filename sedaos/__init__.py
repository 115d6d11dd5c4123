"""Client core for the account screens: change password, edit profile, profile view."""
