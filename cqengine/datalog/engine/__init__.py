"""
Acyclicity test, join forest and Yannakakis evaluation over in-memory relations.
"""
