"""Infrastructure: Firebase REST clients, repositories, security."""
