"""Asset decoding, caching, and prefetching."""
