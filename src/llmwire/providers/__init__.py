"""Provider protocols, transport and streaming."""
