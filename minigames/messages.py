"""
Messages - Text shown to players and announced to the server.

Templates use positional `{}` placeholders and are filled in with
`Message.format`.
"""


class Message:
    # Command dispatch
    GAME_UNAVAILABLE = "Sorry, {} is no longer available."
    GAME_UNKNOWN_COMMAND = "Sorry, /{} is not available."
    GAME_UNKNOWN_PLAYER = "Sorry, no player with ID {} is connected."
    GAME_USAGE = "Usage: /{} [start | custom | ready | leave | cancel | challenge [ids]]"

    # Signup
    GAME_REGISTRATION_CREATED = "You have started the signup for {}. Others can join with /{}."
    GAME_REGISTRATION_JOINED = "You have signed up for {}."
    GAME_READY = "You are ready to play {}."
    GAME_SESSION_FULL = "Sorry, {} is full."
    GAME_ALREADY_JOINED = "You have already signed up for {}."
    GAME_NOT_JOINABLE = "Sorry, {} has already started."
    GAME_NOT_PARTICIPATING = "You are not playing {}."
    GAME_NOT_ENOUGH_PLAYERS = "There are not enough players to start {}."
    GAME_LEFT = "You have left {}."

    # Start
    GAME_STARTING = "{} is starting!"
    GAME_CANNOT_START = "{} cannot be started: {}"
    GAME_CUSTOMIZATION_CANCELLED = "Customization of {} was cancelled. You are still signed up."
    GAME_CANCELLED = "You have cancelled what you were doing."
    GAME_NOTHING_TO_CANCEL = "There is nothing to cancel right now."
    GAME_ABORTED = "{} has been cancelled: {}"
    GAME_FINISHED = "{} has finished."
    GAME_FINISHED_WINNER = "{} has finished. The winner is {}!"

    # Customization
    GAME_CUSTOMIZE_START = "Start the game"
    GAME_CUSTOMIZE_DONE = "Done"
    GAME_CUSTOMIZE_NUMBER = "Enter a new value for {}:"
    GAME_CUSTOMIZE_INVALID_NUMBER = "Sorry, {} is not a valid number."
    GAME_CUSTOMIZE_ENABLED = "Enabled"
    GAME_CUSTOMIZE_DISABLED = "Disabled"

    # Catalogue
    GAME_CATALOGUE_HEADER = "Games available on the server:"
    GAME_CATALOGUE_ENTRY = "{}. {}"
    GAME_CATALOGUE_EMPTY = "There are no games available right now."
    GAME_CATALOGUE_INVALID = "Sorry, there is no game numbered {}."

    # Announcements
    GAME_ANNOUNCE_SIGNUP = "{} has signed up for {}. Type /{} to join!"
    GAME_ANNOUNCE_STARTED = "{} has started with {} player(s)."
    GAME_ANNOUNCE_WON = "{} has won {}!"

    @staticmethod
    def format(template: str, *args) -> str:
        return template.format(*args)
