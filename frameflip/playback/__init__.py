"""Host frame loop, scheduling clock, and the playback state machine."""
