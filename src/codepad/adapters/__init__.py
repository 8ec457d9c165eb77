"""Host UI adapters for playground sessions."""
