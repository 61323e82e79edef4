"""pygame presentation of a running VDP."""
