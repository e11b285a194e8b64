# Application modules
