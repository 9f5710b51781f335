# ABOUTME: Small shared helpers.
# ABOUTME: Currently holds stable article id hashing.
