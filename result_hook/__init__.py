"""Result Hook — posts rhythm-game result screenshots to a webhook.

Watches a screenshot folder, reads the chart title, clear type and rank
out of each new file's name, and forwards the image with a rich embed.
"""

__version__ = "1.0.0"
__app_name__ = "Result Hook"
