"""Captured ``p4 -s`` output used across the tests."""

CHANGES_OUTPUT = """\
info: Change 3328 on 2002/10/31 by someone@somewhere 'Something important '
info: Change 3327 on 2002/10/31 by someone@somewhere 'Joe's test '
info: Change 332 on 2002/10/31 by someone@somewhere 'thingy'
exit: 0
"""

DESCRIBE_OUTPUT = """\
text: Change 3328 by someone@somewhere on 2002/10/31 18:20:59
text: 
text: \tSomething important
text: \tso there!
text: 
text: Affected files ...
text: 
info1: //depot/myproject/something/file.txt#3 edit
info1: //depot/myproject/something/otherfile.txt#2 add
info1: //depot/myproject/something/docs/readme.txt#7 delete
text: 
text: Change 3327 by someone@somewhere on 2002/10/31 14:20:59
text: 
text: \tJoe's test
text: 
text: Affected files ...
text: 
info1: //depot/myproject/joe/test.cs#1 add
info1: //depot/myproject/joe/test2.cs#4 integrate
text: 
text: Change 332 by otherone@elsewhere on 2002/10/30 09:05:01
text: 
text: \tthingy
text: 
text: Affected files ...
text: 
info1: //depot/myproject/thingy/thingy.build#12 branch
info1: //depot/myproject/thingy/Thingy.cs#5 move/add
text: 
exit: 0
"""
