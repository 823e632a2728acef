import asyncio
import logging

from rich.pretty import pprint

from taskctr import *

__prog__ = "demo"


@define_task({
    "name": "copy",
    "description": "copy one file to another",
    "options": {
        "input": {"type": "string", "short": "i", "description": "input file", "required": True},
        "output": {"type": "string", "short": "o", "description": "output file", "required": True},
    },
})
def copy(options):
    pprint(options)


@define_task({
    "name": "say",
    "description": "print a message after thinking about it",
    "options": {
        "message": {"type": "string", "short": "m", "description": "message to print", "required": True},
        "loud": {"type": "boolean", "short": "l", "description": "print it loudly", "default": False},
    },
})
async def say(options):
    async def think():
        await asyncio.sleep(1)
        return f"oh yeah, {options['message']}"

    text = await with_spinner("thinking...", think)
    print(text.upper() if options["loud"] else text)


tool = create_dispatcher(__prog__, shell=True, fancy=True, colorful=True)
tool.register(copy, say)
tool.set_default(say)


if __name__ == '__main__':
    install_logging(logging.DEBUG)
    tool.run()
