"""scenes — pygame screens: the main HUD, the developer console and the death screen."""
