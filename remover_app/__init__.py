"""Host applications that drive the retouch engine."""
