#!/usr/bin/env python

from syslog5424 import SyslogMessage, StructuredData, Pid
from syslog5424 import parse_message


line = ('<165>1 2003-10-11T22:14:15.003Z mymachine.example.com evntslog - ID47 '
        '[exampleSDID@32473 iut="3" eventSource="Application" eventID="1011"] '
        'An application event log entry...')

message = parse_message(line)
print(repr(message))

serialized = message.to_json(indent=2)
print(serialized)
assert SyslogMessage.from_json(serialized) == message

sd = StructuredData()
sd.insert_tuple("origin@32473", "ip", "192.0.2.1")
reply = message._replace(procid=Pid(4711), sd=sd, msg="relayed")
print(reply.format())
