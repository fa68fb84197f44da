"""Infrastructure: Firestore store adapter and peer RPC clients."""
