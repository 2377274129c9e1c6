"""kube-can-i: ask the API server whether the current identity may perform an action."""
