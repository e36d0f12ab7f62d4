from pcmkservice import config
config.core.debug = True
