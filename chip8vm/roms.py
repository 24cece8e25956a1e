"""ROMs shipped with the package."""
import base64

# Maze demo (David Winter): fills the screen with random diagonal strokes
# and then spins on JP 21C.
MAZE = base64.b64decode(
    "YABhAKIiwgEyAaIe0BRwBDBAEgRgAHEEMSASBBIcgEAgECBAgBA=")
