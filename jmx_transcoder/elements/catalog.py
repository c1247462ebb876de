"""Every built-in element kind, in the order the component library lists them."""
from . import assertions, config_elements, controllers, extractors, listeners, plan, samplers, scripting, threads, timers

BUILTIN_CODECS = [
    *plan.CODECS,
    *threads.CODECS,
    *samplers.CODECS,
    scripting.CODECS[0],
    *controllers.CODECS,
    *config_elements.CODECS,
    scripting.CODECS[1],
    *extractors.CODECS,
    scripting.CODECS[2],
    *assertions.CODECS,
    *timers.CODECS,
    *listeners.CODECS,
]

CATEGORIES = (
    "root",
    "threads",
    "sampler",
    "controller",
    "config_element",
    "preprocessor",
    "postprocessor",
    "assertion",
    "timer",
    "listener",
)
