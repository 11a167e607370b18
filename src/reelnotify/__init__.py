"""
reelnotify — Discord webhook status cards for media transcode jobs.
"""

__version__ = "0.3.0"
