"""Line-level parsing: field splitting, classification, month context and source reading."""
