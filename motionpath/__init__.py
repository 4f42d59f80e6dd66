"""Sensor-fusion speed estimation for accelerometer, gyroscope and GPS samples."""
