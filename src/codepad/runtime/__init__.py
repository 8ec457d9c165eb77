"""Runtime services shared by every codepad component."""
