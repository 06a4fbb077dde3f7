"""Log levels and entries, shared settings, a rolling file writer, timers and an exception hook."""