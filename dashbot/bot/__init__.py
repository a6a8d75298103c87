"""Discord bot: command registry, dispatch and the gateway client"""
