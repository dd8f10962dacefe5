"""Runtime services: telemetry, frame layout, and the render loop."""
