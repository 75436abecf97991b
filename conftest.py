import os

# Qt widgets and QImage painting run without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
