"""
The MODEL layer contains the motion logic of the wheel.
It has NO knowledge of painting or of mouse events; it consumes angle samples
and ticks and reports changes through Qt signals.
"""
