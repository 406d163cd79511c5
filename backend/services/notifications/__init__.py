"""
Order notification helpers: message rendering, WhatsApp links and webhook dispatch.
"""
