"""User account service: sign-up, login and user listing."""
