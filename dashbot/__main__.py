"""Run the bot (the dashboard API starts once the client is ready)"""

from dashbot.bot.bot import run

if __name__ == "__main__":
    run()
