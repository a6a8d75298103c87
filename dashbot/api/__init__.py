"""Dashboard REST API served next to the bot"""
