"""
Game constants for Cards Against Humanity.

This module contains all constant values used throughout the game,
including timer tags, warning offsets and exempt roster modes.
"""

# Minimum active players needed to play a round
MIN_PLAYERS = 3

# Cards each active player holds at the start of a round
HAND_SIZE = 10

# Timer tags
TIMER_TAGS = {
    'START': 'start',
    'LOBBY': 'lobby',
    'ROUND': 'round',
    'WINNER': 'winner'
}

# Seconds before a round/winner deadline at which a warning is announced
DEADLINE_WARNINGS = (60, 30, 10)

# Roster modes that never receive new game notifications
NOTIFY_EXEMPT_MODES = ('~', '&')

# Message types emitted by the transport
MESSAGE_TYPES = {
    'SAY': 'say',
    'DIRECT': 'direct',
    'NOTICE': 'notice'
}

# Chat commands understood by the command layer
COMMANDS = (
    'start', 'stop', 'pause', 'resume', 'join', 'quit', 'cards', 'play',
    'list', 'winner', 'points', 'status', 'pick', 'discard'
)

NO_GAME_MESSAGE = 'No game running. Start the game by typing !start.'
