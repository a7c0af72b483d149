"""Movie catalog tools backed by the StreamNest content API."""
