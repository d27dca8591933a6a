"""awsri - reserved instance and savings plan cost calculator"""

__version__ = "0.1.0"
