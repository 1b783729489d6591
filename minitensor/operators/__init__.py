"""Operators: concat, element-wise arithmetic, transpose, matmul, relu, clip and cast."""