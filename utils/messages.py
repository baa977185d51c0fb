"""Built-in bot texts. All of them are markdown, rendered to Telegram HTML on send."""

ERROR_MESSAGE_PREFIX = "⚠️ *Beep, boop, error!*"

DEFAULT_MSG_TEMPLATE = """👋 *Selamat bergabung* $firstname ($safeusername) di $groupname yuk perkenalkan diri dan startup nya ! 😀
Kalau sobat memiliki permasalahan tentang startup, feel free to discuss with us 😀"""

START_MSG = "Add me to a group! :)"

INTRO_MSG = """👋 Hi $firstname!

Perkenalkan saya Sobat ABP bot, mulai saat ini saya akan menemani sobat di group $groupname"""

NOT_GROUP_MSG = "*Add me to a group first!*"

NOT_OWNER_MSG = "Only the user who introduced me to this group can change the message!"

EMPTY_TEMPLATE_MSG = "You can't set an empty message!"

TEMPLATE_SET_MSG = "✔️ New welcome message set! Here's an example:\n\n{example}"

UNEXPECTED_ERROR_MSG = "Something went wrong on my side, please try again later."

HELP_MSG = """*Selamat datang di bot help*

I will send a welcome message to every new member of a group.

I will start as soon as I get added to a group.

To customize the message, use the command `/change_welcome_message <your new message>`.

You can use the following templates:

- `$username`: the new member's username (with the @ character)
- `$safeusername`: the username, but if it isn't defined by the user, the first name will be used instead
- `$firstname`: the new member's first name
- `$groupname`: the group's name

Write `$$` instead of `$` (for example `$$firstname`) to show a template name as it is.

IMPORTANT: `$username` could fail if the user hasn't defined a username, and when that happens the resulting string will be `@undefined`. Because of this, it is recommended to use `$safeusername` instead.

Keep in mind that *only* the user who introduces me to a group can execute this command.

Enjoy! 😊"""

# Shown in the Telegram command menu
COMMAND_DESCRIPTIONS = {
    "change_welcome_message": "Change this group's welcome message",
    "help": "How to use the bot",
    "start": "Get started",
}
